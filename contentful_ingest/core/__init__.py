"""Core pipeline: models, transforms, per content type processing and the plugin."""
