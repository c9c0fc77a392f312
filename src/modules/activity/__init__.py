"""Activity analysis module: classifier prompt for daily activity descriptions."""
