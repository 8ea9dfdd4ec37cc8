"""Campus events API with email and realtime notification fan-out."""
