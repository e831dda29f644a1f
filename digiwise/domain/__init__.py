"""Domain entities for the DigiWise assessment."""
