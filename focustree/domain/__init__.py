"""Domain layer - pure models and logic, free of I/O."""
