"""REST facade over the activity record store."""
