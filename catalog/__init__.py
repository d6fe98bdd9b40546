"""Local library catalog: entity mutation and integrity rules"""
