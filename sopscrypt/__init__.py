"""
sops-crypt encrypts and decrypts secret files in a source tree with sops.

Plaintext secrets and their encrypted counterparts live side by side. Files are selected by
name, and the name of each output file is derived from the name of its input. The sops command
performs all encryption and decryption.

The rules used to pair filenames are (with the default configuration):

\b
    * 'config-secret.yaml' is encrypted to 'config-secret.enc.yaml'.
    * 'config-secret.enc.yaml' is decrypted to 'config-secret.yaml'.
    * 'config.enc.yaml' is decrypted to 'config-secret.yaml'.

Encrypt every secret that changed since it was last encrypted:

\b
    $ sops-crypt encrypt-all

Decrypt every encrypted secret below a directory:

\b
    $ sops-crypt decrypt-all deploy/

Encrypt or decrypt a single file:

\b
    $ sops-crypt encrypt config-secret.yaml
    $ sops-crypt decrypt config-secret.enc.yaml

Show the active configuration and how to override it:

\b
    $ sops-crypt show-config
"""

__version__ = '1.0.0'
