"""Named constants shared by the faces and the host."""
