"""Terminal UI runtime: navigation stack, views, widgets and the Textual host."""
