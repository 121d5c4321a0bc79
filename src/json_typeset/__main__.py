from json_typeset.cli import main

main()
