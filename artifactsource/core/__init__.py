"""Tree model, diff engine, filters and content sniffing."""
