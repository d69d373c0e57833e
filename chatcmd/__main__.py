from chatcmd.cli import main

main()
