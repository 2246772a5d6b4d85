"""
Lemke-Howson pivoting and equilibrium enumeration.
"""
