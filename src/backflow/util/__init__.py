"""Generic helpers shared by the frontend and the analyses."""
