#!/usr/bin/env python3
"""Standalone relay: run the Energy-Wise backend and browser client.

    cd samples/relay
    poetry run python app.py

Requires GOOGLE_API_KEY in your environment or a .env file.
Starts on http://localhost:3001; open it in a browser or run energy-wise-chat.

Environment variables:
    PORT: Server port (default: 3001)
    GEMINI_MODEL: Gemini model (default: gemini-2.0-flash)
    SYSTEM_PROMPT: Replaces the Energy-Wise instruction (optional)
"""
from energy_wise.standalone import main

if __name__ == "__main__":
    main()
