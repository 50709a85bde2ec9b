"""apr1crypt.handlers -- hash handler implementations"""
