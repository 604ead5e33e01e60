"""Exceptions shared by the database layer and the retrieval collaborators"""


class RetrievalError(Exception):
    """A collaborator failed; the whole ranking request fails with it"""
