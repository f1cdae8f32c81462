"""asymctl - command line client for asymcrypt."""
