# TON Docs Search – ranked documentation search for TON development
# Copyright (c) 2026 4rce.com Digital Technologies GmbH. All rights reserved.
# Non-commercial use only. Commercial licensing: info@4rce.com

__version__ = "1.0.0"
