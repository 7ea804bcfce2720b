"""Test package for energy-wise."""
from dotenv import find_dotenv, load_dotenv

# pick up GOOGLE_API_KEY for the live Gemini tests, if a .env is around
load_dotenv(find_dotenv(usecwd=True))
