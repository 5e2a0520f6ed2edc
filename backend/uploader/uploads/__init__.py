"""Upload module.

Takes a file plus tenant and directory slugs, stores it in the configured
bucket and returns a public URL.

Naming policies (chosen by ``upload.policy``):
- timestamped: ``{tenant}/{directory}/{epoch-millis}-{name}``, always writes
- no_clobber:  ``{tenant}/{directory}/{name}``, 409 when the key exists
"""
