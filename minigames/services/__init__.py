"""External collaborators: host bridge and persistence."""
