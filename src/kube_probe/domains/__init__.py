"""Built-in Kubernetes domains contributing controls to the probe."""
