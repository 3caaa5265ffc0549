"""Service layer: the release pipeline and its collaborators."""
