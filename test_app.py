#!/usr/bin/env python3
"""Test script to check app dependencies."""

import sys
import os

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

try:
    print("Testing imports...")

    import streamlit as st
    print("✓ Streamlit imported successfully")

    import requests
    print("✓ Requests imported successfully")

    from src.models.registration import RegistrationRecord
    print("✓ Registration model imported successfully")

    from src.services.config_service import get_settings
    print("✓ Config service imported successfully")

    from src.services.registration_service import start_create_flow
    print("✓ Registration service imported successfully")

    from src.ui.registration_form import render_registration_form
    print("✓ Registration form UI imported successfully")

    settings = get_settings()
    print(f"✓ Settings loaded, API endpoint: {settings.api_end_point}")

    state = start_create_flow()
    print(f"✓ Create flow started on step {state.step}")

    print("\nAll imports successful! App should work.")

except Exception as e:
    print(f"✗ Error: {e}")
    import traceback
    traceback.print_exc()
