"""Host adapters for the comparison engine."""
