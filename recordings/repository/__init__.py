"""Repository layer: DB access helpers (sqlite3 / PyMySQL).

Keep functions thin and focused, so the store avoids SQL strings.
"""
