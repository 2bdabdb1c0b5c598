"""Collaborators around the resolver: source retrieval, rewriting, writing."""
