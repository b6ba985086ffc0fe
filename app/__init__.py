"""
Aplicación: configuración, render OpenCV y front end PyQt6
"""
