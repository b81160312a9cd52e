"""Static project page generation for the MapSwipe website."""
