"""
UI Package for the MKF-ECG Dashboard.

This package contains the Streamlit dashboard and Plotly visualization utilities.
"""
