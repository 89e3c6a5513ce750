"""Question-template matching and answer resolution for job-application autofill."""
