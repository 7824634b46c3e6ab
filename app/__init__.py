"""Course platform backend: enrollments and live user notifications."""
