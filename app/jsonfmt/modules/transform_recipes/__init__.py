"""
Transform recipes: named, reusable transform configurations (opaque JSON text).
"""
