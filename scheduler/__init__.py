"""Host process for the bracelet simulator."""
