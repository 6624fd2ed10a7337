"""Pure path and mount arithmetic for a launch."""
