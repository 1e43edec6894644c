"""Blueprint data model: walls, openings, rooms, sheets and edits."""
