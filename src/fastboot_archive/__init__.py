"""Package a build output directory into a versioned zip for a fastboot app server."""
