from .cli import main

main(prog_name="check-proxmox-travel")
