"""Login and upload pages (plain HTML, no styling)."""
