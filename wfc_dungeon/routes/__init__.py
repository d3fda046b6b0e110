"""HTTP blueprints for the dungeon map service."""
