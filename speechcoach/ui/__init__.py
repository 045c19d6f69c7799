"""Client side: microphone recorder, session state, API client and Streamlit page."""
