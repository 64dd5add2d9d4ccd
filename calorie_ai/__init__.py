"""CalorieAI — local identity & sync store for a personal nutrition log."""
