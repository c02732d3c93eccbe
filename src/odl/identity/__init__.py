"""
Identity - local keys and wallet-discovered accounts.
"""
