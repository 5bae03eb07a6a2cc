"""Holiday counting and filtering rules."""
