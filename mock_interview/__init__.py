"""AI mock interview service: résumé-driven questions, chat and scoring."""
