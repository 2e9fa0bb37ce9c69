"""TaskMind - personal task and habit tracker with recurring tasks and streaks."""
