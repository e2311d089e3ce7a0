"""Personal study-plan generator: weighted subjects, weekly schedules and insights."""
