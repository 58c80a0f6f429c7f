"""Entry points onto the dependency core.

``cli`` drives a local JSON database from the terminal; ``api`` serves
the same operations over HTTP for the web canvas. Both only translate
input and errors and leave every graph rule to the application layer.
"""
