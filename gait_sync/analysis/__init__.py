"""
Gait reference analysis and marker transplant modules.
"""
