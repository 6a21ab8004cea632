"""Mission progression service for the size-tracking and gifting app."""
