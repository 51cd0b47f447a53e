"""Flask JSON API over the fleet package."""
