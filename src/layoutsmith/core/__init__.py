"""Building blocks shared by the decoration pipeline: model, loader, context."""
