"""Application services orchestrating routines, folders, ordering and progress."""
