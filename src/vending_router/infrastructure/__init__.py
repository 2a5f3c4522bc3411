"""Infrastructure: the in-process event router."""
