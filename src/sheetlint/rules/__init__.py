"""Built-in sheetlint rules."""
