"""OrderDesk backend."""
