"""Deal board services: session gating, write-through store, filtering."""
