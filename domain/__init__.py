"""
Tipos de dominio compartidos por todas las capas
"""
