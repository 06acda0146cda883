"""Host front ends."""
