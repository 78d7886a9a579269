"""Pygame front end for the maze chase engine."""
