"""Loading of MyST pages."""
