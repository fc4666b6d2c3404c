"""Infrastructure adapters: Firestore REST and in-memory stores."""
